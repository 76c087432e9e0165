from projectile_lab.__main__ import main

# -----------------------
# Run the app
# -----------------------
if __name__ == "__main__":
    main()
