import sys
import logging


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    # For detailed debugging, change level to logging.DEBUG
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(funcName)s - %(message)s')
    from .app import CalculatorApp

    print("TechSolve calculator starting...")
    print("Modes: Standard, Scientific, Programmer (BIN/OCT/DEC/HEX), Date.")
    app = CalculatorApp(settings_file=argv[0] if argv else None)
    try: app.root.mainloop()
    except KeyboardInterrupt: print("\nInterrupted."); app.on_close()
    except Exception as e:
        logging.getLogger(__name__).critical(f"Unhandled main loop exception: {e}", exc_info=True)
        app.on_close()
        raise


if __name__ == "__main__":
    main()
