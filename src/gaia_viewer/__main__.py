from gaia_viewer.main import main

raise SystemExit(main())
