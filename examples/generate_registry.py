# Print a module that registers the example models without reflection.

from models import Event, Line, Point

from jsonshape.generate import generate


def main():
    print(generate([Point, Line, Event]))


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        pass
