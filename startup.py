#!/usr/bin/env python3
"""
Startup script: prepares the local backend (migrations, media directory) and runs the app
"""
import os
import subprocess
import sys
from pathlib import Path


def run_migrations():
    """Bring the local database to the latest Alembic revision"""
    print("[STARTUP] Applying migrations...")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        print(f"[STARTUP] ❌ Migrations failed:\n{result.stderr}")
        return False
    print("[STARTUP] ✅ Database is up to date")
    return True


def prepare_media_root(media_root: str):
    path = Path(media_root)
    path.mkdir(parents=True, exist_ok=True)
    print(f"[STARTUP] 📁 Photo storage: {path.resolve()}")


def start_app():
    host = os.getenv("HOST", "0.0.0.0")
    port = os.getenv("PORT", "8000")
    print(f"[STARTUP] 🚀 Starting app on {host}:{port}...")
    os.execvp("uvicorn", ["uvicorn", "app.main:app", "--host", host, "--port", port])


def main():
    backend = os.getenv("BACKEND", "supabase")
    print(f"[STARTUP] Backend: {backend}")

    if backend == "local":
        if not run_migrations():
            sys.exit(1)
        prepare_media_root(os.getenv("MEDIA_ROOT", "./media"))

    start_app()


if __name__ == "__main__":
    main()
