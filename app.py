# app.py
"""
Entrypoint da aplicação.

Uso:
  python app.py overview --data-dir data
  python app.py forecast 12345 --today 15/01/2024
  python app.py orders --group-by product
  python app.py mark-received 7
"""

from stockcast.adapters.cli import main

if __name__ == "__main__":
    main()
