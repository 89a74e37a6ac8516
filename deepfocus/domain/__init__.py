"""Domain layer for deepfocus.

Pure models and algorithms, no I/O:

- shared: Result monad and domain event base
- types: TaskPath value object
- task: Tree models, traversal, leaf selector and priority buckets
- focus: Hierarchical descent that picks the next task
"""
