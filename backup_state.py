from pathlib import Path
from datetime import datetime

from app.db import SessionLocal
from app.storage import SqlStateStore, dump_state

# Paths
BASE_DIR = Path(__file__).resolve().parent
BACKUP_DIR = BASE_DIR / "backups"


def main():
    BACKUP_DIR.mkdir(exist_ok=True)

    db = SessionLocal()
    try:
        state = SqlStateStore(db).load()
    finally:
        db.close()

    if state is None:
        print("❌ No league data stored yet")
        return None

    # Nombre del backup con fecha y hora
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M")
    backup_file = BACKUP_DIR / f"golf_league_{timestamp}.json"
    backup_file.write_text(dump_state(state, indent=2), encoding="utf-8")

    print(f"✅ Backup created: {backup_file.name}")
    return backup_file


if __name__ == "__main__":
    main()
