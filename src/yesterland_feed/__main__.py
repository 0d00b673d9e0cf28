from yesterland_feed.api.app import main

main()
