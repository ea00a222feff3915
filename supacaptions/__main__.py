"""Package entry point for ``python -m supacaptions``.

Delegates to the CLI's main(). The HTTP server has its own entry point,
``supacaptions-api``.
"""

from supacaptions.cli import main

if __name__ == "__main__":
    main()
