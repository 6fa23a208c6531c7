"""File-based templates -- the most common real-world pattern.

The class name picks the template: ``ReleaseNotesMd`` renders
``templates/release-notes.md`` next to this file.

Run:
    python app.py
"""

from dataclasses import dataclass, field

from kiln import display

PROJECT = "kiln"


@display
@dataclass
class ReleaseNotesMd:
    version: str
    fixes: list[str] = field(default_factory=list)
    breaking: bool = False


notes = ReleaseNotesMd("0.2.0", ["Faster tokenizer", "Clearer <errors>"])
quiet = ReleaseNotesMd("0.2.1")
output = str(notes)


def main() -> None:
    print(output, end="")
    print()
    print(quiet, end="")


if __name__ == "__main__":
    main()
