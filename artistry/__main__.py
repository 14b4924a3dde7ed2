# Local dev entrypoint: python -m artistry
import os

from .core import create_app

if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=int(os.environ.get("PORT", 5000)))
