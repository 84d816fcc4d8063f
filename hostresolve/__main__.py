from hostresolve.main import run

run()
