# fmods

A small command-line mod manager for Factorio. It keeps a list of Factorio
installations ("instances"), reads the game version and the versions of the
built-in content (`base`, `quality`, `elevated-rails`, `space-age`) from
each one, and downloads mods from the mod portal together with their
required dependencies. Before anything is downloaded it shows which mods
will be installed, which will be updated and which conflicting mods will be
removed, and asks for confirmation.

## Installation

```
pip install .
```

This installs the `fmods` command.

## Usage

Register an instance (the directory of a Factorio installation, which must
contain a `data` directory with the `base` content) and make it the default:

```
fmods instances add vanilla /path/to/factorio --default
```

`instances add` refuses to overwrite an existing name unless `--replace` is
given or you confirm the replacement when asked.

Manage instances:

```
fmods instances list
fmods instances default vanilla
fmods instances unset-default
fmods instances remove vanilla
```

Work with the selected instance. The instance is taken from `--instance`,
or else the default one, or else (when asking is enabled) you are prompted
to type its name:

```
fmods info
fmods list
fmods download some-mod 1.2.3
fmods remove some-mod
```

- `info` prints the instance path, game version, number of installed mods
  and the built-in content versions.
- `list` prints the installed mods and their versions.
- `download NAME [VERSION]` resolves the dependencies of the given release,
  prints the planned changes and, after a `y` answer, downloads and unpacks
  the needed archives, replaces outdated mods and deletes installed mods the
  release conflicts with. Without a version, the compatible releases are
  listed and you type the one you want. Only releases built for the
  instance's game version, whose required built-in content is present in a
  sufficient version, are offered.
- `remove NAME` deletes an installed mod's directory.

### Options

- `--instance NAME` – use the named instance for this command.
- `--ask` / `--no-ask` – turn interactive questions on or off, overriding
  the `ask` setting of the configuration file. The confirmation before a
  download is always asked.

## Configuration

Settings are kept in `fmods/config.toml` inside the user configuration
directory. A missing or unreadable file is treated as the defaults
(`ask = true`, no instances):

```toml
ask = true
default_instance = "vanilla"

[instances]
vanilla = "/path/to/factorio"
```

Mods are installed into `Factorio/mods` inside the same user configuration
directory; it is created if it does not exist.

## Library use

The pieces can be used on their own:

- `fmods.mod_info` – `Version`, `Dependency` (with `Dependency.parse` for
  strings such as `"? some-mod >= 1.2.0"`), and `ModInfo` / `ModRelease`
  built from mod portal JSON.
- `fmods.config` – `Config.load` and `Config.save`.
- `fmods.instance` – `Instance.open`, `Instance.find_mod`,
  `Instance.remove_mod` and `read_mods`.
- `fmods.factorio_api` – `FactorioApi.get_mod`, which returns only the
  releases compatible with an instance, oldest first.
- `fmods.dependencies` – `process_dependencies` and `Changes.compute`.
- `fmods.downloader` – `Downloader.download` and `extract_archive`.

## Limitations

- Mods are not enabled or disabled in the game's mod list; only their
  directories are added or deleted.
- Removing a mod does not remove the dependencies that came with it, and
  does not check whether other installed mods still need it.
- Only unpacked mod directories are recognised as installed mods.

## Development

```
pip install -e .[test]
pytest
```