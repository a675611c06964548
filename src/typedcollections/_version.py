"""Version information for typedcollections.

The version is declared here and nowhere else: ``pyproject.toml`` reads
``version`` from this module when building. A release build writes the tagged
version into ``_generated_version.py`` beside this file, which takes
precedence; an ordinary checkout has no such file and reports the development
version below.
"""

import pathlib
from typing import Any, Dict, Tuple, Union


def _read_version() -> Tuple[str, Tuple[Union[str, int], ...]]:
    version_contents: Dict[str, Any] = dict(
        version="0.1.0.dev0",
        version_tuple=(0, 1, 0, "dev0"),
    )

    # Neither
    #     from typedcollections import _generated_version
    # nor
    #     from . import _generated_version
    # works in the build environment, so read the file directly.
    gen_file = pathlib.Path(__file__).parent / "_generated_version.py"
    try:
        exec(gen_file.read_text(), version_contents)
    except Exception:
        # The generated file does not exist or is not valid.
        # Ignore it.
        pass
    return version_contents["version"], version_contents["version_tuple"]


version, version_tuple = _read_version()
