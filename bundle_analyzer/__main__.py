from bundle_analyzer.main import main

main()
