import asyncio
import os
import sys

from module_processor import main_loop


def main() -> None:
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

    try:
        asyncio.run(main_loop())
    except KeyboardInterrupt:
        print("\n\n🚨 The program has been stopped. The terminal is ready for commands.")
    except Exception as e:
        print(f"\n\n❌ Error: {str(e)}")
    finally:
        if sys.platform != "win32" and sys.stdin.isatty():
            os.system("stty sane")
        print("👋 The program has ended. The terminal is ready for commands.")


if __name__ == "__main__":
    main()
