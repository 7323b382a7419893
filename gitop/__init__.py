"""gitop - git working copies as stateful, cancellable objects."""

__version__ = "0.1.0"
