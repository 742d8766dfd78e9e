# run_tasks_manually.py
import asyncio
import sys

from app.core.logging_config import setup_logging
from app.tasks_registry import TASKS


async def main(job_names: list[str]):
    """
    Поочередный запуск фоновых задач из реестра.
    Без аргументов запускаются все задачи.
    """
    unknown = [name for name in job_names if name not in TASKS]
    if unknown:
        print(f"Unknown jobs: {', '.join(unknown)}. Available: {', '.join(TASKS)}")
        sys.exit(1)

    selected = job_names or list(TASKS)
    print("--- Manual Task Runner ---")

    for index, name in enumerate(selected, start=1):
        print(f"\n[{index}/{len(selected)}] Running: {name}...")
        # Задачи синхронные, запускаем в отдельном потоке, не блокируя event loop
        await asyncio.to_thread(TASKS[name]["function"])
        print("Done.")

    print("\n--- All tasks completed! ---")


if __name__ == "__main__":
    setup_logging()

    try:
        asyncio.run(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nScript interrupted by user.")
