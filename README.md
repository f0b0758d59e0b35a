# mobilekit

Building blocks for tooling that sets up and maintains mobile Rust projects.
It is a library of helpers and installs no command of its own. It needs
nothing beyond the standard library. Several helpers run external programs
(`git`, `git-lfs`, `ln`, `cargo`, `rustc`, `rustup`, `pip`), which must be on
the search path when those helpers are used.

## Modules

- `mobilekit.paths`
  - `install_dir()` is `$CARGO_HOME/.mobilekit`, or `~/.cargo/.mobilekit` when
    `CARGO_HOME` is unset. `checkouts_dir()` and `tools_dir()` are its
    `checkouts` and `tools` subdirectories.
  - `home_dir()`, `expand_home()` (replaces a leading `~` component) and
    `contract_home()` (replaces the home directory with `~`; unchanged on
    Windows).
  - `prefix_path(root, path)` joins a path under a root, and resolves `.`,
    `..` and rooted components itself for `\\?\` verbatim roots.
    `unprefix_path(root, path)` strips the root and raises `PathNotPrefixed`
    if the path is not under it.
  - `relativize_path(abs_path, abs_relative_to)` expresses one absolute path
    relative to another; both must be absolute, or `ValueError` is raised.
  - `normalize_path()` resolves an existing path or makes a missing one
    absolute; `under_root(path, root)` tells whether `root / path` stays
    inside `root`; `last_modified(first, second)` returns the more recently
    modified path, `first` on a tie.
- `mobilekit.versions`
  - `VersionTriple.parse("1.49")` gives `VersionTriple(major=1, minor=49, patch=0)`;
    more than three parts or a non-numeric part raises `VersionTripleError`.
  - `VersionDouble.parse()` does the same for `major[.minor]`
    (`VersionDoubleError`).
  - `RustVersion.parse(output)` reads `rustc --version` output, including an
    optional flavor (`-nightly`, `-beta.3`) and commit hash and date;
    `RustVersion.check()` runs `rustc --version` itself. `valid()` rejects
    the rustc releases known not to work on macOS and is always true
    elsewhere. Failures raise `RustVersionError`.
- `mobilekit.util`
  - `list_display(["a", "b", "c"])` gives `"a, b, and c"`;
    `reverse_domain("example.com")` gives `"com.example"`.
  - `run_and_search(command, pattern, handler)` runs a command, searches its
    output with a regular expression and passes the match to `handler`,
    raising `RunAndSearchError` if the command fails or nothing matches.
  - `host_target_triple()`, `rustup_add(triple)`, `command_present(name)`,
    `prepend_to_path()`, `get_string_for_group()`, `installed_commit_msg()`,
    `format_commit_msg()`, `one_or_many()`, and `with_working_dir()`, a
    context manager that changes the working directory and restores it.
- `mobilekit.cli`: `Report.error()`, `Report.action_request()` and
  `Report.victory()` build labelled reports; `Report.print(wrapper)` writes
  errors to standard error and the rest to standard output, coloured when the
  terminal allows it (`NO_COLOR`, `CLICOLOR` and `CLICOLOR_FORCE` are
  honoured). `TextWrapper` wraps to the terminal width without breaking on
  hyphens. `Report.exit_code()` is 0 for victories and 1 otherwise.
- `mobilekit.prompt`: `minimal()`, `default()`, `yes_no()`,
  `list_display_only()` and `choose_from_list()`, which keeps asking until a
  valid index is entered.
- `mobilekit.git`: `Git(root)` builds `git -C <root> ...` argument lists and
  runs `init`, reads `.git/config` and `.gitmodules`, and queries the user's
  name and e-mail. `ensure_lfs_present()` checks for `git-lfs` and runs
  `git lfs install`, raising `LfsError`.
- `mobilekit.repo`: `Repo` is a shallow checkout. `status()` fetches and
  compares `HEAD` with its upstream (`Status.STALE` or `Status.FRESH`);
  `update(url, branch)` clones if missing, otherwise fetches, hard-resets to
  `origin/<branch>` and cleans. Failures raise `RepoError`.
- `mobilekit.submodule`: `Submodule(remote, path, name=None, lfs=False)`;
  `init(git, commit)` adds and initializes the submodule when needed and can
  check out a commit. A missing name is inferred from `<name>.git` in the
  remote. Failures raise `SubmoduleError`.
- `mobilekit.ln`: `Call` runs `ln -n` for hard or symbolic links with a
  `Clobber` policy; `force_symlink()` and `force_symlink_relative()` replace
  whatever file or directory is in the way. Failures raise `LinkError`.
- `mobilekit.cargo`: `CargoCommand("build", target=..., release=True, ...)`
  assembles a cargo command line with `args()`, and `run(env)` runs it with
  `CARGO_TARGET_DIR` and `CARGO_BUILD_TARGET_DIR` passed through. A given
  `manifest_path` is resolved at construction and must exist.
- `mobilekit.templating`: `lookup_pack(directory, name)` finds
  `<name>.toml` (a `FancyPack`) or a `<name>` directory (a `SimplePack`);
  `lookup_platform()` and `lookup_app()` search the installed
  `templates/platforms` and `templates/apps`. A fancy pack's TOML has a
  `path`, an optional `base` pack name and an optional `[submodule]` table
  (`remote`, `path`, `name`, `lfs`). `resolve(git, submodule_commit)` returns
  the directories to use, base pack first. `list_app_packs()` lists the
  installed app packs.
- `mobilekit.update`: `update(wrapper)` checks the tool's checkout in the
  checkouts directory, and when it is stale (or an earlier update left the
  `.updating` marker) updates it, reinstalls it with
  `pip install --force-reinstall`, and prints a victory report.

## Example

```python
from mobilekit.versions import VersionTriple
from mobilekit.paths import prefix_path, relativize_path
from mobilekit.cli import Report, TextWrapper

VersionTriple.parse("1.49")          # VersionTriple(major=1, minor=49, patch=0)
prefix_path("/home/user/project", "app/build")
relativize_path("/a/b/c", "/a/d")    # PosixPath('../b/c')

Report.victory("all done", "nothing more to do").print(TextWrapper())
```

## What it does not do

- There is no command-line program; the pieces are meant to be called from
  one.
- Template packs are found and resolved to directories, but nothing here
  renders templates or copies them into a project.

## Tests

```
pip install -e .[test]
pytest
```