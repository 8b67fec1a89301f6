from pathtrace.app.viewer import main

if __name__ == "__main__":
    main()
