from relay_topup.logger import AsyncLogger


async def show_trx_log(
    address: str,
    trx_type: str,
    explorer: str,
    tx_hash: str,
    account_name: str | None = None
) -> None:
    logger = AsyncLogger()

    explorer_link = f"{explorer.rstrip('/')}/tx/{_normalize_hash(tx_hash)}"
    await logger.logger_msg(
        f"Transaction Type: {trx_type}. Explorer: {explorer_link}",
        type_msg="success", account_name=account_name, address=address
    )


def _normalize_hash(raw_hash: str) -> str:
    hash_str = str(raw_hash)
    return hash_str if hash_str.startswith("0x") else f"0x{hash_str}"
