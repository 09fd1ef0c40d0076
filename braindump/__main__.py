from braindump.cli import main

raise SystemExit(main())
