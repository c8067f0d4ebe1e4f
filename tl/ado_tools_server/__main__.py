from tl.ado_tools_server.server import main


main()
