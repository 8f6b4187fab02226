from webscaffold.pipeline import main

main()
