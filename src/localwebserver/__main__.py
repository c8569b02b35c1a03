from localwebserver.cli import main

main()
