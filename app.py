"""Entry point for Streamlit (cloud/local).

`streamlit run app.py` and `streamlit run streamlit_app.py` start the same
Flow Architect console.
"""

from streamlit_app import main


if __name__ == "__main__":
    main()
