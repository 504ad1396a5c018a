from itops_issue_tracker.tracker.main import main

raise SystemExit(main())
