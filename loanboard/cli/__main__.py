from .loan_cli import main

main()
