"""Module entrypoint for `python -m gitcast`.

This module enables running gitcast as a Python module using `python -m gitcast`.
It forwards to the same main() function as the console script.

Usage:
    ```bash
    # Run as module (equivalent to 'gitcast' command)
    python -m gitcast analyze --format json

    # Repository podcast with the local Ollama backend
    python -m gitcast --generator ollama podcast my-repo
    ```

Note:
    Prefer using the installed console script `gitcast` when available,
    as it's more convenient and doesn't require Python module syntax.
"""

from .cli import main

if __name__ == "__main__":
    main()
