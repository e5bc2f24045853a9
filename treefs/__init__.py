"""
treefs - an in-memory directory tree with a shell and a save/reload format.

Main API:
    from treefs import Session

    # Start with an empty root
    session = Session()

    # Build and navigate the tree
    session.mkdir("docs")
    session.cd("docs")
    session.create("notes")
    print(session.pwd())          # /docs

    # Save and restore it
    session.save("tree.txt")
    session.reload("tree.txt")

    # List the root
    print(session.ls())           # [("docs", True)]
"""

from .session import Session

__version__ = "0.1.0"
__all__ = ["Session"]
