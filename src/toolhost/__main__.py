from toolhost.cli import main

main()
