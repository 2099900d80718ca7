from .cli import Console
