# lineshift/utils/__init__.py
from .backlog import seed_backlog
