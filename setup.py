from setuptools import setup, find_packages

setup(name='typh5',
      version='0.1',
      description='Typed values, groups and attributes on top of the HDF5 C library.',
      url='http://github.com/zequihg50/typh5',
      author='Ezequiel Cimadevilla',
      author_email='ezequiel.cimadevilla@unican.es',
      license='MIT',
      packages=find_packages(include=["typh5", "typh5.*"]),
      install_requires=[
          "numpy",
          "h5py",
      ],
      extras_require={
          "test": [
              "pytest",
          ],
      },
      zip_safe=False)
