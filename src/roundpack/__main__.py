from roundpack.cli import main

main()
