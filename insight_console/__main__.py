from insight_console.main import main

raise SystemExit(main())
