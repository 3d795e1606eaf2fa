from release_script.cli.app import main

main()
