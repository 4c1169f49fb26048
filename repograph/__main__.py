from repograph.modules.cli import main

raise SystemExit(main())
