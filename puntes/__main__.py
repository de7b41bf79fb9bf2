from puntes.main import main

raise SystemExit(main())
