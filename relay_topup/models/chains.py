from dataclasses import dataclass


@dataclass(frozen=True)
class ChainConfig:
    name: str
    id: int
    rpc: str
    binance_network: str
    explorer: str
    cex_withdraw_supported: bool = True


CHAINS: dict[str, ChainConfig] = {
    'ethereum': ChainConfig(
        name='ethereum',
        id=1,
        rpc='https://rpc.ankr.com/eth',
        binance_network='ERC20',
        explorer='https://etherscan.io'
    ),
    'optimism': ChainConfig(
        name='optimism',
        id=10,
        rpc='https://rpc.ankr.com/optimism',
        binance_network='OPTIMISM',
        explorer='https://optimistic.etherscan.io'
    ),
    'arbitrum': ChainConfig(
        name='arbitrum',
        id=42161,
        rpc='https://arbitrum.drpc.org',
        binance_network='ARBITRUM',
        explorer='https://arbiscan.io'
    ),
    'zksync': ChainConfig(
        name='zksync',
        id=324,
        rpc='https://zksync.drpc.org',
        binance_network='ZKSYNCERA',
        explorer='https://explorer.zksync.io'
    ),
    'base': ChainConfig(
        name='base',
        id=8453,
        rpc='https://base.blockpi.network/v1/rpc/public',
        binance_network='BASE',
        explorer='https://basescan.org'
    ),
    'linea': ChainConfig(
        name='linea',
        id=59144,
        rpc='https://rpc.linea.build',
        binance_network='LINEA',
        explorer='https://lineascan.build',
        cex_withdraw_supported=False
    ),
}
