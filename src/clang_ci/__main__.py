from clang_ci.cli.main import main

main()
