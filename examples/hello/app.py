"""Hello World -- the simplest kiln example.

A context class with an inline template. No templates directory needed.

Run:
    python app.py
"""

from kiln import display


@display(text="Hello, {{ self.name }}!\n", suffix="txt")
class Greeting:
    def __init__(self, name: str):
        self.name = name


output = str(Greeting("World"))


def main() -> None:
    print(output, end="")
    print()

    # Every instance renders the same template with its own state
    for name in ["Kiln", "Python", "Templates"]:
        print(Greeting(name), end="")


if __name__ == "__main__":
    main()
