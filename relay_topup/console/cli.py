from art import text2art
from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table
from rich import box
from rich.text import Text

from relay_topup.models import Config


class Console:
    __slots__ = ("rich_console",)

    def __init__(self):
        self.rich_console = RichConsole()

    def show_dev_info(self):
        print("\033c", end="")

        styled_title = Text(text2art("Relay Topup", font="doom"), style="cyan")
        content = Text.assemble(
            styled_title,
            "\n👉 CEX -> L2 -> Ethereum mainnet via relay.link 💸\n"
        )

        panel = Panel(
            content,
            border_style="yellow",
            expand=False,
            title="[bold green]Welcome[/bold green]",
        )
        self.rich_console.print(panel)
        print()

    def display_info(self, config: Config, wallets_count: int):
        table = Table(title="System Configuration", box=box.ROUNDED)
        table.add_column("Parameter", style="cyan")
        table.add_column("Value", style="magenta")

        table.add_row("Wallets", str(wallets_count))
        table.add_row("Topup chains", ", ".join(config.topup_chains))
        table.add_row(
            "Topup amount",
            f"{config.topup_amount.min}-{config.topup_amount.max} ETH",
        )
        table.add_row(
            "Bridge share",
            f"{config.bridge_share.min * 100:.0f}-{config.bridge_share.max * 100:.0f}%",
        )
        table.add_row(
            "Mainnet gas",
            f"{config.gas.start_gwei} -> {config.gas.max_gwei} GWEI (+{config.gas.step} every {config.gas.delay_minutes} min)",
        )
        table.add_row("Max relayer fee", f"{config.max_relayer_fee_eth:.6f} ETH")
        table.add_row(
            "Delay between accounts",
            f"{config.delay_between_accounts.min}-{config.delay_between_accounts.max} sec",
        )
        table.add_row("Shuffle wallets", str(config.shuffle_wallets))
        table.add_row("Telegram chats", str(len(config.tg_chat_ids)))

        self.rich_console.print(
            Panel(
                table,
                expand=False,
                border_style="green",
                title="[bold yellow]System Information[/bold yellow]",
            )
        )

    def build(self, config: Config, wallets_count: int):
        self.show_dev_info()
        self.display_info(config, wallets_count)
