from .friendship import Friendship
