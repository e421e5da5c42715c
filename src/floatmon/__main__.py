from floatmon.cli import main

raise SystemExit(main())
