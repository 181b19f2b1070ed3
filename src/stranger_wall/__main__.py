from stranger_wall.main import run

run()
