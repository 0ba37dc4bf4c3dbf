from .game_list_vm import GameListViewModel

__all__ = ["GameListViewModel"]
