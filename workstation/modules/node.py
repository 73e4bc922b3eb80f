#!/usr/bin/env python3
"""
Workstation Node Module
Node.js LTS through the Node Version Manager
"""

from pathlib import Path
from typing import Mapping

from workstation.modules.base import BaseModule, ModuleContext

NVM_INSTALL_LTS = 'source "$NVM_DIR/nvm.sh" && nvm install --lts'


def nvm_dir(home: Path, environ: Mapping[str, str]) -> Path:
    """Where the NVM installer puts nvm: $XDG_CONFIG_HOME/nvm, else ~/.nvm"""
    xdg = environ.get('XDG_CONFIG_HOME')
    if xdg:
        return Path(xdg) / 'nvm'
    return home / '.nvm'


class NodeModule(BaseModule):
    module_id = 7
    label = 'Node & NVM'
    # Runs before the git config module
    order = 6

    def run(self, ctx: ModuleContext):
        ctx.reporter.step("Installing Node via NVM…")
        target = nvm_dir(ctx.home, ctx.environ)

        if target.is_dir():
            ctx.reporter.info("NVM is already installed. Skipping installation.")
        elif ctx.dry_run:
            ctx.reporter.dry(f"Would install NVM {ctx.versions.get_version('nvm')} using official script.")
        else:
            ctx.external.run(ctx.versions.get_url('nvm'), interpreter=('bash',))

        if ctx.dry_run:
            ctx.reporter.dry("Would install LTS version of Node.js.")
            return

        ctx.shell.run(['bash', '-c', NVM_INSTALL_LTS], env={'NVM_DIR': str(target)})
