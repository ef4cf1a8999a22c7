from csv2graph.cli import main


raise SystemExit(main())
