from pathlib import Path

import aiofiles

from relay_topup.models.queue_model import QueueState

ROOT_DIR = Path(__file__).parent.parent.parent.absolute()
DEFAULT_DATA_DIR = ROOT_DIR / "config" / "data" / "client"


class QueueStorage:
    """
    Three newline-delimited wallet lists on disk.

    ``walletsData.txt`` is both the input and the remaining list; it is
    rewritten after every wallet so a restart resumes where the last run
    stopped. Writes overwrite the whole file.
    """
    REMAINING_FILE = "walletsData.txt"
    SUCCESS_FILE = "successWallets.txt"
    FAILED_FILE = "failedWallets.txt"

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.data_dir = Path(data_dir or DEFAULT_DATA_DIR)
        self.remaining_path = self.data_dir / self.REMAINING_FILE
        self.success_path = self.data_dir / self.SUCCESS_FILE
        self.failed_path = self.data_dir / self.FAILED_FILE

    @staticmethod
    async def _read_lines(path: Path) -> list[str]:
        if not path.exists():
            return []
        async with aiofiles.open(path, "r", encoding="utf-8") as file:
            content = await file.read()
        content = content.replace("\r\n", "\n")
        return [line.strip() for line in content.split("\n") if line.strip()]

    @staticmethod
    async def _write_lines(path: Path, lines: tuple[str, ...]) -> None:
        async with aiofiles.open(path, "w", encoding="utf-8") as file:
            await file.write("\n".join(lines))

    async def load(self) -> QueueState:
        return QueueState.from_lines(
            remaining=await self._read_lines(self.remaining_path),
            succeeded=await self._read_lines(self.success_path),
            failed=await self._read_lines(self.failed_path),
        )

    async def save(self, state: QueueState) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        await self._write_lines(self.failed_path, state.failed)
        await self._write_lines(self.success_path, state.succeeded)
        await self._write_lines(self.remaining_path, state.remaining)
