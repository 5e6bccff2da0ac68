import streamlit as st

from congregation import routes

st.title("Page Not Found")
st.write("The page you are looking for does not exist or has moved.")
st.page_link(routes.HOME.page, label="Back to Home", icon=routes.HOME.icon)
