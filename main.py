"""
main.py — Bootstrap

1. Load tuning constants
2. Create the app
3. Push the room scene (builds the world, level 1)
4. Run
"""

from core import tuning
from core.app import App
from scenes.room_scene import RoomScene


def main():
    tuning.load()
    app = App(title="Room Raider")
    app.push_scene(RoomScene())
    app.run()


if __name__ == "__main__":
    main()
