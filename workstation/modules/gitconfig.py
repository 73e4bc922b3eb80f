#!/usr/bin/env python3
"""
Workstation Git Config Module
Opinionated ~/.gitconfig with the delta pager, sane pull/push defaults and aliases
"""

from typing import Optional
import logging

from workstation.config import GitIdentity, RunMode, WorkstationConfig
from workstation.modules.base import BaseModule, ModuleContext

logger = logging.getLogger(__name__)

CI_NAME = 'CI Bot'
CI_EMAIL = 'ci@example.com'

GITCONFIG_BODY = '''
# For multiple identities, uncomment and create the second file:
# [includeIf "gitdir:~/work/"]
#     path = ~/.gitconfig_work

[core]
    editor = {editor}
    pager  = delta --paging=always
    excludesfile = ~/.gitignore_global
    autocrlf = input
[init]
    defaultBranch = main
[color]
    ui = auto
[pager]
    diff = delta
    log = delta
    show = delta
    reflog = delta
[interactive]
    diffFilter = delta --color-only --features=interactive
[delta]
    features = +decorations
    side-by-side = true
    line-numbers = true
    navigate = true
    hyperlinks = true
    hyperlinks-file-link-format = vscode://file/{{path}}:{{line}}
[delta "interactive"]
    keep-plus-minus-markers = false
[delta "decorations"]
    commit-decoration-style = blue ol
    commit-style = raw
    file-style = omit
    hunk-header-decoration-style = blue box
    hunk-header-file-style = red
    hunk-header-line-number-style = #067a00
    hunk-header-style = file line-number syntax
[pull]
    rebase = false
    ff = only
[push]
    default = current
    autoSetupRemote = true
[merge]
    conflictstyle = zdiff3
    ff = only
[rebase]
    autosquash = true
    autostash = true
[alias]
    co = checkout
    br = branch -vv
    st = status -sb
    ci = commit -v
    amend = commit --amend --no-edit
    fixup = commit --fixup
    rebase-i = rebase -i --autosquash
    lg = log --all --graph --decorate --oneline
    gd = diff
    gds = diff --staged
    pr = pull --rebase --autostash
'''


def render_gitconfig(identity: GitIdentity, editor: str = 'nvim') -> str:
    """
    Build the full ~/.gitconfig content

    Args:
        identity: user.name, user.email and optional signing key
        editor: core.editor

    Returns:
        File content
    """
    lines = [
        '# Generated by workstation',
        '[user]',
        f'    name  = {identity.name}',
        f'    email = {identity.email}',
    ]
    if identity.signingkey:
        lines.append(f'    signingkey = {identity.signingkey}')
    return '\n'.join(lines) + '\n' + GITCONFIG_BODY.format(editor=editor)


def resolve_git_identity(mode: RunMode, config: WorkstationConfig, input_source,
                         name: Optional[str] = None, email: Optional[str] = None,
                         signingkey: Optional[str] = None) -> GitIdentity:
    """
    Settle the git identity for this run

    Command-line values win, then the config file. Whatever is still
    missing is asked for on the terminal, except under CI where the
    placeholders are used without prompting.

    Args:
        mode: Run mode
        config: Loaded user configuration
        input_source: Object with ask(prompt) -> str
        name: --name value
        email: --email value
        signingkey: --signingkey value

    Returns:
        GitIdentity
    """
    name = name or config.git_name
    email = email or config.git_email
    signingkey = signingkey or config.git_signingkey

    if not name and not mode.ci:
        name = input_source.ask('Your git user.name  ')
    if not email and not mode.ci:
        email = input_source.ask('Your git user.email ')

    return GitIdentity(
        name=name or CI_NAME,
        email=email or CI_EMAIL,
        signingkey=signingkey or None,
    )


class GitConfigModule(BaseModule):
    """Writes ~/.gitconfig after backing up the existing one"""

    module_id = 6
    label = 'Opinionated ~/.gitconfig with delta'
    # Runs after Node
    order = 7

    def run(self, ctx: ModuleContext):
        ctx.reporter.step("Writing ~/.gitconfig…")
        gitconfig = ctx.home / '.gitconfig'
        identity = ctx.identity or GitIdentity(name=CI_NAME, email=CI_EMAIL)

        ctx.backups.backup(gitconfig)
        if ctx.dry_run:
            ctx.reporter.dry("Would create ~/.gitconfig (after backing up if it exists).")
            return

        gitconfig.write_text(render_gitconfig(identity, ctx.config.git_editor))
        logger.info("Wrote %s for %s <%s>", gitconfig, identity.name, identity.email)
