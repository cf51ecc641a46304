from ckb_monitor.monitor import main

if __name__ == "__main__":
    main()
