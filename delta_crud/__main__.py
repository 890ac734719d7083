from delta_crud.app import run

run()
