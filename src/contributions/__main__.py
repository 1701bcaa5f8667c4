from contributions.cli import main

raise SystemExit(main())
