"""Module entrypoint for ``python -m dromledger``.

All argument parsing and dispatch happen in ``dromledger.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
