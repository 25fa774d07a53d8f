from nbscrub.cli import main

main()
