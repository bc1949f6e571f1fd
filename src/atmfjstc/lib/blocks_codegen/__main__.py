from atmfjstc.lib.blocks_codegen.cli import main


if __name__ == '__main__':
    main()
