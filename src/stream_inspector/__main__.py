"""Entry point for running stream-inspector as a module.

Usage:
    python -m stream_inspector inspect captures.json
    python -m stream_inspector decode-token <token>
"""

from stream_inspector.cli import main

if __name__ == "__main__":
    main()
