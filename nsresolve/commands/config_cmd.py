"""
ConfigCommand — Configuration display and updates
"""

from ..commands.base import BaseCommand


COMMAND_NAME = 'config'


class ConfigCommand(BaseCommand):
    """Command for configuration management."""

    def show_config(self):
        """Show current configuration."""
        template = self.template()
        template.header("NSRESOLVE CONFIG", "Current Configuration")
        template.section("SETTINGS", self._cli.config_manager.display())
        print(template.render())

    def set_config(self, key: str, value: str, scope: str = "project"):
        """Set a configuration value."""
        symbols = self.symbols
        manager = self._cli.config_manager
        error = manager.set(key, value, scope)

        template = self.template()

        if error:
            template.header("NSRESOLVE CONFIG", "Error")
            template.section("ERROR", error)
        else:
            template.header("NSRESOLVE CONFIG", "Configuration Updated")
            template.section("SETTING", f"Set {key} = {manager.get(key)}")
            if scope == "project":
                template.section("SAVED TO", str(manager.project_config_path))
            else:
                template.section("SAVED TO", str(manager.user_config_path))
            template.footer(f"{symbols.check_pass} Configuration saved")

        print(template.render())


def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', metavar='KEY=VALUE',
                   help='Set config value (e.g., font_lock.dynamic=macro,core)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        if '=' not in args.set:
            print("Error: Use format KEY=VALUE (e.g., resolve.dialect=cljs)")
        else:
            key, value = args.set.split('=', 1)
            scope = "user" if args.user else "project"
            cli.set_config(key, value, scope)
    else:
        cli.show_config()
