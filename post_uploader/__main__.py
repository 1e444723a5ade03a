"""Run the Post Uploader API server: ``python -m post_uploader``."""

from .server import main

if __name__ == "__main__":
    main()
