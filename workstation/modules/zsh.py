#!/usr/bin/env python3
"""
Workstation Zsh Module
Oh-My-Zsh, Powerlevel10k, a curated plugin set and the managed ~/.zshrc block
"""

from pathlib import Path
from typing import List, Tuple
import logging

from workstation.modules.base import BaseModule, ModuleContext

logger = logging.getLogger(__name__)

ZSHRC_SENTINEL = '# --- workstation.sh block start ---'

# (GitHub owner/repo, directory under $ZSH_CUSTOM)
ZSH_PLUGINS: List[Tuple[str, str]] = [
    ('romkatv/powerlevel10k', 'themes/powerlevel10k'),
    ('zsh-users/zsh-syntax-highlighting', 'plugins/zsh-syntax-highlighting'),
    ('marlonrichert/zsh-autocomplete', 'plugins/zsh-autocomplete'),
    ('Aloxaf/fzf-tab', 'plugins/fzf-tab'),
    ('jeffreytse/zsh-vi-mode', 'plugins/zsh-vi-mode'),
    ('mafredri/zsh-async', 'plugins/async'),
    ('zsh-users/zsh-autosuggestions', 'plugins/zsh-autosuggestions'),
    ('zsh-users/zsh-history-substring-search', 'plugins/zsh-history-substring-search'),
]

ZSHRC_BLOCK = r'''# --- workstation.sh block start ---
# Generated by workstation
if [[ -r "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh" ]]; then
  source "${XDG_CACHE_HOME:-$HOME/.cache}/p10k-instant-prompt-${(%):-%n}.zsh"
fi

HISTFILE=~/.zsh_history
HISTSIZE=100000
SAVEHIST=100000
setopt APPEND_HISTORY INC_APPEND_HISTORY SHARE_HISTORY

export ZSH="$HOME/.oh-my-zsh"
ZSH_THEME="powerlevel10k/powerlevel10k"

plugins=(git zsh-syntax-highlighting)

# Installed and ready to be enabled:
# plugins+=(zsh-autosuggestions zsh-autocomplete fzf-tab zsh-history-substring-search zsh-vi-mode async)

source "$ZSH/oh-my-zsh.sh"
[[ -f ~/.p10k.zsh ]] && source ~/.p10k.zsh
autoload -Uz compinit && compinit

export PATH="$HOME/.local/bin:$PATH"
if [[ "$(uname -s)" == "Linux" ]]; then
  export PATH="$HOME/.config/composer/vendor/bin:$PATH"
fi

[ -d /opt/homebrew/bin ] && eval "$(/opt/homebrew/bin/brew shellenv)"

export NVM_DIR="$([ -z "${XDG_CONFIG_HOME-}" ] && printf %s "${HOME}/.nvm" || printf %s "${XDG_CONFIG_HOME}/nvm")"
[ -s "$NVM_DIR/nvm.sh" ] && \. "$NVM_DIR/nvm.sh"

command -v direnv &>/dev/null && eval "$(direnv hook zsh)"
command -v zoxide &>/dev/null && eval "$(zoxide init zsh)"
command -v thefuck &>/dev/null && eval "$(thefuck --alias)"

alias ls='eza --icons'
alias ll='eza -alF --group-directories-first --ignore-glob=".DS_Store|.localized"'
alias lt='eza -alF --sort=modified --ignore-glob=".DS_Store|.localized"'

# Debian ships bat as batcat
if command -v batcat &>/dev/null && ! command -v bat &>/dev/null; then
  alias cat='batcat --paging=never'
  alias bat='batcat'
else
  alias cat='bat --paging=never'
fi

alias find='fd'
alias grep='rg'
alias top='btm'
alias du='dust'
# --- workstation.sh block end ---
'''


class ZshModule(BaseModule):
    """Zsh with Oh-My-Zsh and the Powerlevel10k prompt"""

    module_id = 1
    label = 'Oh-My-Zsh + Powerlevel10k prompt'

    def run(self, ctx: ModuleContext):
        ctx.reporter.step("Setting up Zsh prompt…")
        ctx.packages.ensure(['zsh'])

        self._install_oh_my_zsh(ctx)
        custom = self.zsh_custom(ctx)
        for repo, subdir in ZSH_PLUGINS:
            self._clone_plugin(ctx, repo, custom / subdir)

        self.merge_zshrc(ctx)

    def zsh_custom(self, ctx: ModuleContext) -> Path:
        custom = ctx.environ.get('ZSH_CUSTOM')
        if custom:
            return Path(custom)
        return ctx.home / '.oh-my-zsh' / 'custom'

    def _install_oh_my_zsh(self, ctx: ModuleContext):
        if (ctx.home / '.oh-my-zsh').is_dir():
            return

        ctx.reporter.info("Installing Oh-My-Zsh...")
        if ctx.dry_run:
            ctx.reporter.dry("Would run Oh-My-Zsh install script.")
            return

        ctx.external.run(
            ctx.versions.get_url('oh-my-zsh'),
            interpreter=('sh',),
            args=('', '--unattended'),
            env={'RUNZSH': 'no', 'CHSH': 'no'},
        )

    def _clone_plugin(self, ctx: ModuleContext, repo: str, target: Path):
        if target.is_dir():
            ctx.reporter.info(f"Zsh plugin '{target.name}' already exists. Skipping.")
            return

        ctx.reporter.info(f"Cloning Zsh plugin: {target.name}")
        if ctx.dry_run:
            ctx.reporter.dry(f"Would clone {repo} into {target}")
            return

        ctx.shell.run(['git', 'clone', '--depth=1', f"https://github.com/{repo}.git", str(target)])

    def merge_zshrc(self, ctx: ModuleContext):
        """
        Add the managed block to ~/.zshrc once

        The existing file is backed up first, then rewritten as its
        previous content followed by the block.
        """
        ctx.reporter.step("Configuring ~/.zshrc…")
        zshrc = ctx.home / '.zshrc'

        previous = zshrc.read_text() if zshrc.is_file() else ''
        if ZSHRC_SENTINEL in previous:
            ctx.reporter.info("workstation.sh configurations already exist in ~/.zshrc. Skipping.")
            return

        ctx.reporter.info("Appending workstation.sh configurations to ~/.zshrc...")
        ctx.backups.backup(zshrc)
        if ctx.dry_run:
            ctx.reporter.dry("Would append configurations to ~/.zshrc (after backing up).")
            return

        zshrc.write_text(f"{previous}\n{ZSHRC_BLOCK}")
        logger.info("Wrote managed block to %s", zshrc)

    def finish_hints(self) -> List[str]:
        return ["Run 'p10k configure' in a new shell to customize your prompt."]
